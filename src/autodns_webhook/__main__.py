from autodns_webhook.app import main

main()
