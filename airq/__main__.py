from airq.main import main

main()
