from gsr.cli import main

main()
