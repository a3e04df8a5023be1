from synapomorphia.cli import main

main()
