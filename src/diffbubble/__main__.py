from diffbubble.cli import main

main()
