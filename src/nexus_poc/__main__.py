from nexus_poc.cli import main

raise SystemExit(main())
