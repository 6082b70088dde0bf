from flixbus_mcp.server import main

main()
