from moodtracker.main import main

main()
