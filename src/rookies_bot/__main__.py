import sys

from rookies_bot.cli import main

sys.exit(main())
