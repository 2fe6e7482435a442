"""Maven-layout artifact cache: resolve prebuilt artifacts and publish new ones."""
