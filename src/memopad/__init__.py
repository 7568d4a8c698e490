"""memopad — plain-file memo storage with pin and custom-order sidecars."""
