from monoscope.cli.app import main

main()
