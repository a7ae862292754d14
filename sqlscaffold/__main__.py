from sqlscaffold.cli import main

main()
