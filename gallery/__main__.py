from gallery.server import main

main()
