import sys

from ota_html.pipeline import main

sys.exit(main())
