from pyslackmoji.emoji_dumper import main

main()
