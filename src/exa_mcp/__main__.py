from exa_mcp.server import main

main()
