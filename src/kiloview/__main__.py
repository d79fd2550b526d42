from .editor import main

raise SystemExit(main())
