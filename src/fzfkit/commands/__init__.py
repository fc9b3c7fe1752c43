"""Built-in CLI sub-commands for fzfkit."""
