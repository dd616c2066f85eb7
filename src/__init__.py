"""Beach temperature sync: context broker to PostGIS."""
