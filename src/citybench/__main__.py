from citybench.cli import main

main()
