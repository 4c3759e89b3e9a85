from dxfscene import main

raise SystemExit(main())
