"""Plugin system: pluggy hooks fired after ledger and issuer changes."""

from __future__ import annotations

import pluggy

hookimpl = pluggy.HookimplMarker("pcorder")
