from checkmate_cli.check_cmd import main

main()
