import sys

from preview_reaper.main import main

sys.exit(main())
