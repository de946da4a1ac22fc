from replay_launcher.cli import main

raise SystemExit(main())
