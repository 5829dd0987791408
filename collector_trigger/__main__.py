from collector_trigger.trigger import start


start()
