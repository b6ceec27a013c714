"""Steps of the generation loop: command execution, coverage, prompts, cursor and validation."""
