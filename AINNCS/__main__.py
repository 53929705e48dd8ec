from AINNCS.driver import main

main()
