"""Dev server launcher.

Defaults the ledger to a SQLite file under ``.data/`` so evidence survives
restarts; an explicit ``LEDGER_STORAGE_URL`` wins.
"""

import os

DEV_STORAGE_URL = "sqlite:///./.data/greenloop_proof_store.db"


def main() -> None:
    """Run the dev server."""
    os.environ.setdefault("LEDGER_STORAGE_URL", DEV_STORAGE_URL)

    from greenloop.main import run

    run()


if __name__ == "__main__":
    main()
