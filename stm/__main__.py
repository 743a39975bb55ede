from stm.cli.app import main

main()
