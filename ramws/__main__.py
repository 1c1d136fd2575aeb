from ramws.cli.main import main

main()
