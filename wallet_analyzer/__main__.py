from wallet_analyzer.tools.get_related_wallets import main

raise SystemExit(main())
