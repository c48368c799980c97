from formbot.cli import main

raise SystemExit(main())
