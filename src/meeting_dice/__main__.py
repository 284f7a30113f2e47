import sys

from meeting_dice.cli import main

sys.exit(main())
