"""Release panel bounded context.

This package is split into:
- domain: version models, comparison, reconciliation and suggestion rules
- flow: panel state and the reducer driving it
- view: pure rendering of panel state
- infra: host message codec, session store and timers
"""

from __future__ import annotations
