from rankjudge.cli import main

main()
