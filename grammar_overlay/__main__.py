from __future__ import annotations

from grammar_overlay.cli import main

raise SystemExit(main())
