"""Server — request pipeline and the sequential accept loop."""
