from props.main import main

main()
