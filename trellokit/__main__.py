from trellokit.cli import main

main()
