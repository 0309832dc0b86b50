# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Allow running the command-line interface with ``python -m gdpr_pseudo``."""

import sys

from gdpr_pseudo.main import main

if __name__ == '__main__':
    sys.exit(main())
