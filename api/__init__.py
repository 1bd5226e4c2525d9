# api - HTTP adapter for the framecheck engine
