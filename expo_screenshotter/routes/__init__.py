"""Route discovery for Expo Router projects."""
