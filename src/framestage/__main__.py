import sys

from framestage import main

sys.exit(main())
