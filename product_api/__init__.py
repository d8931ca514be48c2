"""Product API: CRUD over products with page/size listing."""
