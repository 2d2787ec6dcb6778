from md2slides import main

main()
