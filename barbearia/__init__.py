"""Backend de agendamentos da barbearia."""
