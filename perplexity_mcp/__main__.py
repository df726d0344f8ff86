from perplexity_mcp.cli import main

main()
