# Utils package for the marketplace backend
