from try_picker.cli import main

main()
