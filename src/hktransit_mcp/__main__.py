from hktransit_mcp.server import main

main()
