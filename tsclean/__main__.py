from tsclean.cli import main

main()
