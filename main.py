"""Script entrypoint.

Schedulers (cron, CI workflows) run `python main.py` once per tick.
"""

from lottery_sync.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
