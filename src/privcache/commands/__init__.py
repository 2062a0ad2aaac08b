"""Built-in CLI sub-commands for privcache."""
