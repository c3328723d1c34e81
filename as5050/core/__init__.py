"""Bus access: transport protocol and the Raspberry Pi SPI transport."""
