"""XP and level arithmetic."""
