from __future__ import annotations

ADVISORY = """\
Pass-CLI is a secure password manager that stores credentials locally.

To get started:
  1. Initialize your vault: pass-cli init
  2. Add a credential: pass-cli add myservice
  3. Retrieve it: pass-cli get myservice

Your vault is stored at: ~/.pass-cli/

For more information, run: pass-cli --help
"""


def render_advisory() -> str:
    return ADVISORY
