"""Browser-driven capture pipeline."""
