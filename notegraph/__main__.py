from notegraph.main import main

raise SystemExit(main())
