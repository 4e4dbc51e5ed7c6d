import sys

from wellness_journal.cli import main

sys.exit(main())
