from mdinline.main import main

raise SystemExit(main())
