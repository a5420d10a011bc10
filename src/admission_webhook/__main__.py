"""Allow running the webhook with ``python -m admission_webhook``."""

import sys

from admission_webhook.main import main

sys.exit(main())
