from person_resolver.cli.app import main

main()
